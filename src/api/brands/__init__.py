"""Brands bounded context.

Brand workspaces, the evidence submitted for them, and the Brand Brain
synthesized from that evidence, together with the onboarding flow that
moves a workspace from its first step to an activated Brand Brain.
"""
