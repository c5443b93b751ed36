"""
Demo application: a main window with a two-way bound sub-view-model, a
dialog, a flyout and background work reporting through IUiExecution.

Run with:
    python -m tinymvvm.demo [config.json]
"""
