"""
Chat service - conversation state, history navigation and the submit protocol.
"""
