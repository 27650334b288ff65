"""
admxgen: administrative policy definitions to compiled C# class libraries.
"""

__version__ = "0.1.0"
