"""
HTTP API for PDF upload, extraction and question answering.
"""
