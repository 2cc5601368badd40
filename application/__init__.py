"""
Application Layer for workout tracking.

This package contains:
- ports/: Abstract repository and collaborator interfaces (what the domain needs)
- use_cases/: Orchestration of domain objects through those ports
"""
