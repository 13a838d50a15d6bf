"""Turning raw screen text into a structured listing."""

from evanaliz.parsing.numbers import parse_number, parse_all, parse_coordinates
from evanaliz.parsing.candidates import is_candidate, clean_text, filter_candidates
from evanaliz.parsing.discriminator import PriceRentDiscriminator
