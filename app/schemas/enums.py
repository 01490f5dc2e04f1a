from enum import Enum

class ConnectionStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    blocked = "blocked"

class PersonaVisibility(str, Enum):
    public = "public"
    attendees = "attendees"
    connections = "connections"
    private = "private"

class NotificationType(str, Enum):
    connection_request = "connection_request"
    connection_accepted = "connection_accepted"
