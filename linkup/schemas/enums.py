from enum import Enum

class RequestStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"

class RespondAction(str, Enum):
    accept = "accept"
    reject = "reject"

class MessageKind(str, Enum):
    text = "text"
    image = "image"
    file = "file"

class NotificationKind(str, Enum):
    connection_request = "connection_request"
    connection_accepted = "connection_accepted"
    connection_rejected = "connection_rejected"

class PairStatus(str, Enum):
    no_relation = "no_relation"
    pending_outgoing = "pending_outgoing"
    pending_incoming = "pending_incoming"
    accepted = "accepted"
