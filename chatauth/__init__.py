"""Credential and session core for the chat app."""
