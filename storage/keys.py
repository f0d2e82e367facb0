"""
storage/keys.py

Persisted key namespace.  Thread keys are ``<prefix><subject id>``.
"""

USERS = "mh_users_v1"
MESSAGES_PREFIX = "mh_msgs_"
ISSUES_PREFIX = "mh_issues_"
ADMIN_TICKETS = "mh_admin_tickets"

USER_ID_PREFIX = "u_"
TICKET_ID_PREFIX = "t_"
