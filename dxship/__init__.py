"""dxship — scaffold, build and package a Dioxus web app for static hosting."""

__version__ = "0.1.0"
