# Services package init
"""
Contacts API: Services Layer
============================

What:  Business rules between the routes (HTTP) and the contact store.
How:   Services take a ContactCollection handle plus request data, validate
       and normalize it, call the store and return response models. Errors
       are raised as ContactsAPIError subclasses; HTTP status is decided in
       main.py, never here.

Service Inventory:
    - ContactService: field validation and the five contact operations
"""
