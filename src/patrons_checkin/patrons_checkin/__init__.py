"""Patrons check-in package.

Organized by feature modules (managers, venues, area_services, checkins)
with a thin Flask controller layer over service/repository layers.
"""
