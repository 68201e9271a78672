"""
Console Gateway Service package for the Admin Console Access Layer.

The gateway sits between the admin UI and the upstream API, enforcing:
- Login: phone + OTP exchange against the upstream identity endpoints
- Sessions: httpOnly credential cookie plus a script-readable twin
- Access: a path-based session gate in front of every route
- Forwarding: a catch-all proxy that injects the bearer token

Structure:
- app.main: FastAPI app, routes, and middleware wiring.
- app.adapters: HTTP clients for the upstream API.
- app.domain: Session gate, credential cookies, OTP exchange.
- app.proxy: Route reconstruction, forwarding, and response relay.
"""
