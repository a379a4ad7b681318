"""
Session-scoped singletons for Streamlit services.
"""
import streamlit as st
from functools import wraps


def singleton_session(key_prefix):
    """
    Decorator keeping one instance of a service per Streamlit session.

    The undecorated class stays reachable as ``__wrapped__`` so it can be
    built directly outside a running app, for example in tests.

    Args:
        key_prefix (str): Prefix for the session state key

    Returns:
        Decorated class that behaves as a singleton within the session
    """
    def decorator(cls):
        key = f"{key_prefix}_{cls.__name__}"

        @wraps(cls)
        def get_instance(*args, **kwargs):
            if key not in st.session_state:
                st.session_state[key] = cls(*args, **kwargs)
            return st.session_state[key]

        get_instance.session_key = key
        return get_instance
    return decorator
