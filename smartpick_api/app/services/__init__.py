"""
Service layer abstraction.

Each service encapsulates business logic for a domain and receives the
record store it operates on, keeping API handlers free of persistence
details.
"""
