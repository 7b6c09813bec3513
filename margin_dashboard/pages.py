"""HTML pages rendered with ``render_template_string``."""

STYLE = '''
    <style>
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Arial, sans-serif;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            min-height: 100vh;
            padding: 20px;
        }
        .container {
            max-width: 1200px;
            margin: 0 auto;
            background: white;
            border-radius: 20px;
            padding: 40px;
            box-shadow: 0 20px 60px rgba(0,0,0,0.3);
        }
        .narrow { max-width: 420px; }
        h1 { color: #667eea; margin-bottom: 30px; }
        .header { display: flex; justify-content: space-between; align-items: center; }
        .btn {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
            border: none;
            padding: 10px 24px;
            border-radius: 10px;
            font-size: 14px;
            font-weight: 600;
            cursor: pointer;
            text-decoration: none;
            display: inline-block;
        }
        .btn:hover { box-shadow: 0 10px 20px rgba(102, 126, 234, 0.4); }
        .btn.outline { background: white; color: #667eea; border: 2px solid #667eea; }
        .btn.danger { background: #dc3545; }
        .btn[disabled], .btn.disabled { opacity: 0.5; pointer-events: none; }
        .status { margin-bottom: 20px; padding: 14px 20px; border-radius: 10px; }
        .status.success { background: #d4edda; color: #155724; }
        .status.error { background: #f8d7da; color: #721c24; }
        .tabs { display: flex; gap: 10px; margin-bottom: 20px; }
        .tab { padding: 8px 18px; border-radius: 10px; background: #f0f0f0; cursor: pointer; border: none; }
        .tab.active { background: #667eea; color: white; }
        .panel { display: none; }
        .panel.active { display: block; }
        .grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(340px, 1fr)); gap: 24px; }
        .card { border: 1px solid #e0e0e0; border-radius: 15px; padding: 20px; }
        .card-header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 12px; }
        .card-header form { display: inline; }
        table { width: 100%; border-collapse: collapse; font-size: 14px; }
        th, td { padding: 6px 8px; border-bottom: 1px solid #eee; text-align: left; }
        .right { text-align: right; }
        .center { text-align: center; padding: 30px 0; }
        input[type="text"], input[type="password"], input[type="file"], select {
            width: 100%;
            padding: 10px;
            border: 1px solid #ccc;
            border-radius: 8px;
            margin-bottom: 14px;
        }
        .inline { display: flex; gap: 10px; }
        .inline input { margin-bottom: 0; }
        .city-row { display: flex; justify-content: space-between; align-items: center; padding: 8px 0; border-bottom: 1px solid #eee; }
    </style>
'''

FLASHES = '''
    {% with messages = get_flashed_messages(with_categories=true) %}
      {% for category, message in messages %}
        <div class="status {{ category }}">{{ message }}</div>
      {% endfor %}
    {% endwith %}
'''

LOGIN_PAGE = '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Login - Margin Dashboard</title>
    ''' + STYLE + '''
</head>
<body>
    <div class="container narrow">
        <h1>Login</h1>
        ''' + FLASHES + '''
        <form method="post" action="{{ url_for('login') }}">
            <input type="text" name="username" placeholder="Username" required>
            <input type="password" name="password" placeholder="Password" required>
            <button type="submit" class="btn">Login</button>
        </form>
    </div>
</body>
</html>'''

DASHBOARD_PAGE = '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Margin Dashboard</title>
    ''' + STYLE + '''
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>Margin Dashboard</h1>
            <div>
                <a class="btn outline" href="{{ url_for('index') }}">Refresh</a>
                <a class="btn outline" href="{{ url_for('logout') }}">Logout</a>
            </div>
        </div>
        ''' + FLASHES + '''
        <div class="tabs">
            <button class="tab active" data-tab="view">View Data</button>
            <button class="tab" data-tab="upload">Upload Data</button>
            <button class="tab" data-tab="cities">Cities</button>
        </div>

        <div class="panel active" id="view">
          {% if error %}
            <div class="status error"><strong>Error</strong><br>{{ error }}</div>
          {% elif not city_data %}
            <div class="center">
                <p>No data available. The table is empty.</p>
                <p style="margin-top: 16px;"><a class="btn" href="{{ url_for('index') }}">Refresh Data</a></p>
            </div>
          {% else %}
            <div class="grid">
              {% for city, people in city_data.items() %}
                <div class="card">
                    <div class="card-header">
                        <h3>{{ city }}</h3>
                        <div>
                            <a class="btn outline{% if not people %} disabled{% endif %}"
                               href="{{ url_for('download_city', city=city) }}">Download</a>
                            <form method="post" action="{{ url_for('clear_city', city=city) }}"
                                  data-confirm="This action will clear all data for {{ city }}. This action cannot be undone."
                                  onsubmit="return confirm(this.dataset.confirm);">
                                <button type="submit" class="btn danger"{% if not people %} disabled{% endif %}>Clear Table</button>
                            </form>
                        </div>
                    </div>
                    <table>
                        <thead><tr><th>Name</th><th>CPF</th><th class="right">Margin</th></tr></thead>
                        <tbody>
                          {% for person in people %}
                            <tr>
                                <td>{{ person.name }}</td>
                                <td>{{ person.cpf }}</td>
                                <td class="right">{{ person.margin | margin }}</td>
                            </tr>
                          {% else %}
                            <tr><td colspan="3" class="center">No data available</td></tr>
                          {% endfor %}
                        </tbody>
                    </table>
                </div>
              {% endfor %}
            </div>
          {% endif %}
        </div>

        <div class="panel" id="upload">
            <form method="post" action="{{ url_for('upload') }}" enctype="multipart/form-data">
                <input type="file" name="file" accept=".xlsx">
                <select name="city">
                    <option value="">Select a city</option>
                  {% for city in cities %}
                    <option value="{{ city }}">{{ city }}</option>
                  {% endfor %}
                </select>
                <button type="submit" class="btn">Upload Data</button>
            </form>
        </div>

        <div class="panel" id="cities">
            <form method="post" action="{{ url_for('add_city') }}" class="inline">
                <input type="text" name="city" placeholder="Enter city name">
                <button type="submit" class="btn">Add City</button>
            </form>
            <div style="margin-top: 20px;">
              {% for city in cities %}
                <div class="city-row">
                    <span>{{ city }}</span>
                    <form method="post" action="{{ url_for('delete_city', city=city) }}"
                          data-confirm="This action will delete {{ city }}. This action cannot be undone."
                          onsubmit="return confirm(this.dataset.confirm);">
                        <button type="submit" class="btn danger">Delete</button>
                    </form>
                </div>
              {% else %}
                <p>No cities registered.</p>
              {% endfor %}
            </div>
        </div>
    </div>
    <script>
        // Reopen the tab the last form was submitted from
        const tabs = document.querySelectorAll('.tab');
        function show(name) {
            tabs.forEach(t => t.classList.toggle('active', t.dataset.tab === name));
            document.querySelectorAll('.panel').forEach(p => p.classList.toggle('active', p.id === name));
            sessionStorage.setItem('tab', name);
        }
        tabs.forEach(t => t.addEventListener('click', () => show(t.dataset.tab)));
        show(sessionStorage.getItem('tab') || 'view');
    </script>
</body>
</html>'''
