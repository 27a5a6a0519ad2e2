"""
Surface Agent
ReAct agent that answers with validated, whitelisted UI surfaces.
"""

__version__ = "0.1.0"
