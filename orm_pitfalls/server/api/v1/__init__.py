"""Version 1 routers: health, problems and solutions."""
