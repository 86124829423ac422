"""Filesystem, download and release feed helpers."""
