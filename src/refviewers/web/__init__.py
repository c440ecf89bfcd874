"""Web package for refviewers.

This package contains the FastAPI application that accepts citation
export uploads and serves the ranked reviewer table as JSON and HTML.

To start the web server from the CLI use:
    refviewers serve --port 8000 --reload
"""
