"""
Scenario services.

- problem_scenarios: scripts reproducing each pitfall
- solution_scenarios: the same scripts against ORM-friendly entities
- deps: FastAPI dependencies shared by the routers
"""
