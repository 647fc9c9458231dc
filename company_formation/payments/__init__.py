"""Stripe payment intents and webhook handling."""
