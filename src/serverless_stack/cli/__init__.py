"""Command line tools for Serverless Stack projects"""
