"""Product documentation index, AsciiDoc conversion, fetching, caching and doc tools."""