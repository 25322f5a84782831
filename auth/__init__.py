"""auth/ -- Credentials, session tokens and account storage for WeatherGate.

Layer rule: auth/ imports only stdlib + third-party libraries, plus fastapi
in auth/dependencies.py. It does NOT import from api/ or core/.
api/ imports from auth/, not the other way around.
"""
