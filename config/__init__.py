"""
Runtime configuration: settings (settings.py) and logging bootstrap (log_setup.py).
"""
