"""
Business rules for fbscore.

Each service takes a SQLAlchemy session and never commits; the caller (a
route handler or a script using get_session) owns the transaction. Expected
failures are raised as fbscore.errors types.
"""
