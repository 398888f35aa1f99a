"""FTPS operations module for the implicit TLS FTP client.

This module handles all transfer-related functionality:
- FTPSSession: One libcurl handle reconfigured per operation
- Remote paths: Separator trimming and ftps:// URL building
- Exceptions: FTPS-specific error types
"""
