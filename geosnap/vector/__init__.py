"""Snap resolvers, drafting guides and the snap coordinator."""
