"""Command line interface for asset-deploy"""
