"""Command line interface for release-tool"""
