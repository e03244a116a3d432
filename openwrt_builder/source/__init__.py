"""Source tree management.

This module handles:
- Cloning or updating the OpenWrt checkout
- Registering, updating and installing the custom feed
- Reading commit metadata from the checkout and the feed
"""
