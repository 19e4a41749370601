"""Domain types: inbound events, reply payloads and property listings"""
