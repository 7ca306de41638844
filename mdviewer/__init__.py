"""
Slack Markdown Viewer

Renders markdown and HTML files shared in Slack conversations into
short-lived web pages, for any number of installed workspaces.
"""

__version__ = "1.0.0"
