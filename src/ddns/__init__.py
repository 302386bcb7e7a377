"""ddns - keep Cloudflare DNS records pointed at this host."""

__version__ = "0.1.0"
