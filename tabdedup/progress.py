"""
Progress bar decorator for tabdedup.
"""
from functools import wraps
import sys
import os
from typing import Any, Callable, Optional
from rich.progress import track

NO_PROGRESS_ENV = 'TABDEDUP_NO_PROGRESS'


def progress_enabled(**kwargs) -> bool:
    """Progress is shown only on a TTY, unless disabled by env or kwarg."""
    return (sys.stdout.isatty() and
            not os.environ.get(NO_PROGRESS_ENV) and
            not kwargs.get('no_progress', False))


def with_progress(description: Optional[str] = None) -> Callable:
    """
    Show a progress bar while the decorated function walks its first
    sized, non-string positional argument.

    Args:
        description: Optional description to show (defaults to function name)

    Example:
        @with_progress("Reading tabs")
        def items_from_records(records):
            for record in records:
                ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            enabled = progress_enabled(**kwargs)
            kwargs.pop('no_progress', None)
            if not enabled:
                return func(*args, **kwargs)

            for i, arg in enumerate(args):
                if (hasattr(arg, '__iter__') and
                        not isinstance(arg, (str, bytes, dict)) and
                        hasattr(arg, '__len__')):
                    desc = description or func.__name__.replace('_', ' ').title()
                    new_args = list(args)
                    new_args[i] = track(arg, description=desc, total=len(arg), transient=True)
                    return func(*new_args, **kwargs)

            return func(*args, **kwargs)

        wrapper.without_progress = func
        return wrapper
    return decorator
