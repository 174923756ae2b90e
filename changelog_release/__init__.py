"""Promote a changelog's Unreleased section and publish the release tags."""
