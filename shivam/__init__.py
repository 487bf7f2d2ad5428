"""create-shiv-am -- backend scaffolding with a declarative route system.

The package is split into:

* :mod:`shivam.routing` -- the declarative router core (route table models,
  registries, chain builder, validator, apply step).
* :mod:`shivam.scaffolder` -- renders a new Express/Hono project.
* :mod:`shivam.components` -- adds routes, middleware and services to an
  existing generated project.
* :mod:`shivam.validators` -- scans a generated project for broken references.
"""

__version__ = "0.1.0"
