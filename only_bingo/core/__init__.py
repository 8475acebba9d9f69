"""
Core modules (board generation, win detection, session state, persistence).

Avoid importing the storage stack at package import time; import submodules directly:
- `only_bingo.core.generator`
- `only_bingo.core.checker`
- `only_bingo.core.session`
- `only_bingo.core.boards`
"""

__all__ = []
