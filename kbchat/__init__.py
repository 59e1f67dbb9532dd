"""
kbchat: team chat dashboard backend with a shared knowledge base.
"""
