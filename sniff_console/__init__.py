"""Console application for differential CAN signal hunting.

Ingests CAN frames printed as text lines by a serial sniffer, keeps the
last second of traffic, and lets the operator capture a baseline and then
narrow down which IDs increased or decreased against it.
"""
