"""Potato Doctor: thin front-ends for a remote potato leaf disease classifier.

Modules:
- acquisition: accept uploads and capture photos into an ImageSource
- config: settings resolved from the environment
- diseases: class label lookup and result rendering
- state: screen state machine shared by the front-ends
- utils.api_client: HTTP client for the /predict and /ping endpoints
"""

__version__ = "0.1.0"
