"""NiceGUI interface - thin visualization layer for the advisor chat.

Responsibilities:
    - Chat message display with citation chips and markdown rendering
    - Status indicator while a deferred answer is being polled
    - Distinct styling for error messages
    - New chat sessions

Holds no request logic. Delegates every submission to RequestSubmitter.
"""
