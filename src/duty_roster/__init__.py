"""Duty Roster package.

Residence-hall duty assignments, checklists and completion credits, organized
by feature modules (users, duties, credits, notifications) with a thin Flask
controller layer over service/repository layers backed by Firestore.
"""
