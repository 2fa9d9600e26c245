"""
Memory-match core Python package.

Pure game logic with no presentation concerns, so the Flask app, the
terminal front end and the tests all drive the same state machine.
Modules:
- cards.py: Card, Deck, Symbol
- deal.py: pick_random, shuffle, build_deck
- scheduler.py: delayed and recurring callbacks (threaded or virtual clock)
- state.py: Status, Session, SessionView, PendingPair, WinResult
- machine.py: GameStateMachine
- config.py: GameConfig, load_config, configure_logging
"""
