"""
Axon: adaptive difficulty and session scoring engine for short cognitive
training sessions.

Packages:
- axon.adaptive: pacing engine and tier resolver
- axon.scoring: points, XP and persisted progress merge
- axon.economy: ad frequency gate and XP-priced offers
- axon.session: session state machine, game selection, collaborators
- axon.persistence: key-value store and progress repository
"""

__version__ = "1.0.0"
