"""
Campus Map - Local annotation, event and chat state for a campus map.

All state lives in one application instance and is persisted to a local
key-value store. Rendering widgets (map, route, forms) are collaborators.

Constraints:
- No server
- No multi-user sync
- No authentication
- Substring keyword matching only
"""
