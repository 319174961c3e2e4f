"""
README.md generator — build, deploy and troubleshooting notes.

Documents the base-path invariant, since nothing enforces it at upload
time: the folder on the host must be named after ``base_path``.
"""

from __future__ import annotations

from dxship.core.models.config import ShipConfig
from dxship.core.models.template import GeneratedFile


def generate_readme(config: ShipConfig) -> GeneratedFile:
    build_dir = config.build_output_rel.as_posix()
    folder = config.deploy_folder or "my-app"
    archive = config.archive_name

    content = f"""\
# {config.app_title}

A minimal Dioxus WASM application for testing deployment to shared hosting.

## What This Tests

- ✅ Dioxus compiles to WebAssembly
- ✅ WASM runs in browser (client-side only)
- ✅ No server-side code required
- ✅ Works on shared hosting (HelioHost, Plesk, etc.)

## Prerequisites

- Rust toolchain: https://rustup.rs/
- WASM target: `rustup target add {config.wasm_target}`
- Dioxus CLI: `cargo install dioxus-cli`

## Build Locally

```bash
# Development server (with hot reload)
dx serve

# Production build
dx build --release --platform web
```

## Deploy to Shared Hosting

### Build Output Location

After running `dx build --release --platform web`, files are in:
```
{build_dir}/
```

### Deployment Steps

1. **Create deployment package:**
   ```bash
   cd {build_dir}/
   zip -r ~/{archive} .
   ```

2. **Upload to your host:**
   - Log into Plesk/cPanel/File Manager
   - Navigate to `public_html` or `httpdocs`
   - Create folder named `{folder}` (must match base_path in Dioxus.toml)
   - Upload and extract `{archive}` inside that folder

3. **Verify structure:**
   ```
   public_html/
     {folder}/           <- Folder name must match base_path
       index.html      <- Directly here (not in a subfolder!)
       assets/
         *.js
         *.wasm
   ```

4. **Access your app:**
   ```
   https://yourdomain.com/{folder}/
   ```

## Important Configuration

### base_path Must Match Deployment Folder

In `Dioxus.toml`:
```toml
[web.app]
base_path = "{config.base_path}"  # Must match your folder name!
```

If deploying to `/public_html/my-app/`, use:
```toml
base_path = "/my-app"
```

### Common Issues

**Blank page:**
- Check browser console (F12) for errors
- Verify base_path matches deployment folder name
- Ensure files are in correct location (not nested in extra folders)
- Check that .wasm and .js files uploaded completely

**404 errors for assets:**
- Wrong base_path in Dioxus.toml
- Files in wrong directory structure
- Need to rebuild after changing base_path

**MIME type warnings:**
Add to `.htaccess` in your deployment folder:
```apache
AddType application/wasm .wasm
AddType application/javascript .js
```

## File Sizes

Typical build output:
- WASM file: ~300-400 KB
- JS file: ~60 KB
- Total: ~450 KB (much smaller after gzip)

## Testing Locally

```bash
# After building, test the production files locally:
cd {build_dir}/
python3 -m http.server 8000
# Visit: http://localhost:8000
```

## Success Criteria

If deployed correctly, you should be able to:
- ✓ See the page load
- ✓ Click counter buttons (increment/decrement/reset)
- ✓ Type in input field and see text echoed
- ✓ No errors in browser console

## Resources

- [Dioxus Documentation](https://dioxuslabs.com/)
- [Dioxus Web Platform Guide](https://dioxuslabs.com/learn/{config.dioxus_version}/reference/web)
"""
    return GeneratedFile(path="README.md", content=content, reason="Documentation")
