"""Tests for client address selection."""

from mcp_forwarded.selector import find_client_address, select_client


class TestSelectClient:
    """Test cases for select_client."""

    def test_empty_tokens(self, classifier):
        """Test empty input gives no client and an empty, present list."""
        client, proxies = select_client([], classifier)

        assert client is None
        assert proxies == []

    def test_first_public_wins(self, classifier):
        client, proxies = select_client(["123.45.67.89", "61.160.232.222"], classifier)

        assert client == "123.45.67.89"
        assert proxies == ["61.160.232.222"]

    def test_private_addresses_skipped(self, classifier):
        client, proxies = select_client(["10.144.80.56", "82.132.186.219"], classifier)

        assert client == "82.132.186.219"
        assert proxies == ["10.144.80.56"]

    def test_invalid_tokens_skipped_but_kept_as_proxies(self, classifier):
        """Test hostnames are never picked but stay in the proxy list."""
        client, proxies = select_client(["proxy.local", "", "8.8.8.8", "10.0.0.1"], classifier)

        assert client == "8.8.8.8"
        assert proxies == ["proxy.local", "", "10.0.0.1"]

    def test_no_public_address(self, classifier):
        """Test the proxy list is the whole input when nothing qualifies."""
        tokens = ["10.1.2.162", "proxy.local", "fd00::1"]

        client, proxies = select_client(tokens, classifier)

        assert client is None
        assert proxies == tokens

    def test_all_duplicates_of_client_removed(self, classifier):
        """Test every occurrence of the client address leaves the proxy list."""
        tokens = ["10.0.0.1", "8.8.8.8", "10.0.0.2", "8.8.8.8"]

        client, proxies = select_client(tokens, classifier)

        assert client == "8.8.8.8"
        assert proxies == ["10.0.0.1", "10.0.0.2"]
        assert len(proxies) + tokens.count(client) == len(tokens)

    def test_duplicate_proxies_preserved(self, classifier):
        client, proxies = select_client(["1.1.1.1", "10.0.0.1", "10.0.0.1"], classifier)

        assert client == "1.1.1.1"
        assert proxies == ["10.0.0.1", "10.0.0.1"]

    def test_input_not_mutated(self, classifier):
        tokens = ["10.0.0.1", "8.8.8.8"]

        select_client(tokens, classifier)

        assert tokens == ["10.0.0.1", "8.8.8.8"]


class TestFindClientAddress:
    """Test cases for find_client_address."""

    def test_ipv6_before_ipv4(self, classifier):
        tokens = ["2405:204:828e:fa5a::e64:38a5", "64.233.173.148"]

        assert find_client_address(tokens, classifier) == "2405:204:828e:fa5a::e64:38a5"

    def test_unique_local_ipv6_skipped(self, classifier):
        assert find_client_address(["fc00::1", "64.233.173.148"], classifier) == "64.233.173.148"

    def test_none_found(self, classifier):
        assert find_client_address(["192.168.1.1"], classifier) is None
