"""Advisor Chat - conversational client for the UK SME Tax & Accounting Advisor.

Submits natural-language questions to the advisor backend, follows deferred
answers through job polling, and renders the dialogue with inline citations.

Components:
    - api: HTTP client for the submission and job status endpoints
    - chat: Conversation log, request submission and job polling
    - parsing: Response normalization and citation extraction
    - ui: NiceGUI chat interface
    - models: Message, job and content segment schemas
"""

__version__ = "0.1.0"
