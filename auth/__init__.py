"""
auth — User authentication module.

Provides:
  • Password hashing (bcrypt)
  • Server-side login sessions carried in an HTTP-only cookie
  • ``get_current_user`` / ``owned_todo`` FastAPI dependencies
"""
