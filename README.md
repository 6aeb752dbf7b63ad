# runxpkg

Run command-line tools published as GitHub release assets without installing
them by hand. `runx` finds the release for the version you ask for, picks the
asset that matches your operating system and architecture, downloads it,
installs it into your user cache directory and runs the program.

## Installing

```
pip install runxpkg
```

## Running a tool

Name each package with a leading `+`, then the command and its arguments:

```
runx +owner/repo cmd --flag value
runx +owner/repo@v1.2.3 cmd
```

Packages are read until the first argument without a `+`, which names the
command. The command is looked up only in the installed packages' directories
and runs with those directories put in front of `PATH`.

Without a version, or with `@latest`, the newest release that is neither a
draft nor a prerelease is used. If every release is a draft or prerelease, the
first one listed is used. A non-zero exit code of the tool becomes the exit
code of `runx`; other failures print `[ERROR] ...` and exit with 1.

To install packages without running anything:

```
runx --install owner/repo owner/other@v0.4.0
```

The installed paths are printed. Running `runx` without arguments prints
usage.

## Inspecting releases

The `pkg` command shows what `runx` sees:

```
pkg releases owner/repo
pkg resolve owner/repo@latest
```

`releases` lists the releases of a repository with their assets; `resolve`
prints the package reference with the concrete version it resolves to.

## Choosing and installing an asset

An asset matches a platform when its lower-cased name contains both the OS and
the architecture. `darwin` also matches `macos` and `mac`; `amd64` also
matches `x86_64` and `universal`, `arm64` matches `universal`, and `386`
matches `i386`. Among matching assets, the first one with a known archive
extension (`.tar`, `.gz`, `.tgz`, `.zip`, `.xz`, `.zst` and the like) wins;
otherwise the last match is used.

Archives are unpacked (zip, tar with any compression, or a single gzip, bzip2
or xz stream); if an archive holds a single directory, its contents become the
installation directory. An asset that is not an archive but starts like an
executable (a shebang, ELF, Mach-O or Java class header) is made executable
and linked into the installation directory, under the repository's name when
the file name contains it.

## Authentication

Set `RUNX_GITHUB_API_TOKEN` to a GitHub token to raise the API rate limit and
to reach private repositories. It is sent as a bearer token with both API
requests and downloads.

## Caching

Packages are kept under `runx/pkgs` in the user cache directory, laid out as
`owner/repo/version/os/arch`. Release listings and release metadata are cached
there as JSON for 24 hours; if GitHub cannot be reached, a stale copy is used
instead. Downloads are written to a `.crdownload` file first, and an
interrupted download resumes from it on the next attempt. When no token is
set, API responses are also kept in an HTTP cache under `runx/http` and
revalidated with `ETag` / `Last-Modified`.

## Library use

The pieces are usable on their own:

```python
from runxpkg.models import parse_pkg_ref, current_platform
from runxpkg.registry import Registry

registry = Registry()
ref = registry.resolve_version(parse_pkg_ref("owner/repo"))
path = registry.get_package(ref, current_platform())
```

`runxpkg.runner.RunX` offers `install()` and `run()` as the commands use them.
The package also carries small helpers: `runxpkg.cachehash` for cache keys and
slugs, `runxpkg.filecache` for a file-backed cache with expiry,
`runxpkg.redact` for errors whose messages can be stripped of sensitive
values, `runxpkg.stackerr` for errors that remember where they were made,
`runxpkg.errors` for annotating and joining errors, `runxpkg.envvar` for
reading environment variables and `runxpkg.ids.short_str` for shortening
identifiers.

## What it does not do

- Downloads are not checked against checksums or signatures, and an existing
  installation directory is assumed to be complete.
- An asset that is neither a known archive nor recognisably executable is
  downloaded but not installed.
- There is no command to list, update or remove installed packages; delete
  the directories under `runx/pkgs` by hand.
- `runxpkg.ids` only shortens identifier strings; it does not create or parse
  them.