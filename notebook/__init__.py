"""Notebook backend: shared notes, folders and editor draft handling"""
