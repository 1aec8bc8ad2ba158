"""Baked (pre-compiled) project export."""
