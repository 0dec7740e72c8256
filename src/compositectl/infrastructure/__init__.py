"""Infrastructure layer: package store, workspace, bind graph.

This layer depends on stdlib and third-party libs (NetworkX).
The service layer bridges between domain models and infrastructure.
"""
