"""QR attendance package.

Organized by feature modules (people, attendance, sessions, reports, ...)
with a thin Flask controller layer over service/repository layers and a
key-value document store.
"""
