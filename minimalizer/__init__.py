"""
Controller and test-case helpers for FastAPI applications backed by SQLAlchemy

Controllers get flash/redirect boilerplate for CRUD actions; test cases get
assertions for model validation errors and controller responses.
"""
__version__ = "0.4.0"
