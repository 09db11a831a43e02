"""Core utilities shared by services and routers."""
