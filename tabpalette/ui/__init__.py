"""UI package for the tabpalette terminal user interface.

This package provides the Textual components of tabpalette:

- The host application with its tab bar and note viewer
- The quick switcher palette overlay and its controller
- Confirmation modals

All UI components are built on the Textual framework.
"""
