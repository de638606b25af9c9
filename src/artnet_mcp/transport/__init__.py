"""Transport layer: UDP socket for Art-Net datagrams."""
