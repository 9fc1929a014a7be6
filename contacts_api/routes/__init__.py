"""
Contacts API: Routes Package
============================

Route Inventory:
    - contacts.py:  GET/POST /contacts, GET/PUT/DELETE /contacts/{id}
    - health.py:    GET /health
    - index.py:     GET /

Routes stay thin: extract request data, call ContactService, return its
response model. Errors are raised as exceptions and formatted by the global
handlers in main.py.
"""
