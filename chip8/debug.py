import os

DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False


def log(*args, **kwargs):
    """print only when the DEBUG environment variable is set to 1 or more"""
    if DEBUG: print(*args, **kwargs)
