"""
HTML Template
=============

HTML template for the web interface.
"""

HTML_TEMPLATE = """
<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Form Coach</title>
    <style>
      * {
        box-sizing: border-box;
      }
      body {
        font-family: 'Segoe UI', system-ui, -apple-system, sans-serif;
        margin: 0;
        min-height: 100vh;
        background: #0f172a;
        color: #e2e8f0;
        display: flex;
        justify-content: center;
        align-items: center;
        padding: 1rem;
      }
      .panel {
        background: #1e293b;
        padding: 2rem;
        border-radius: 18px;
        box-shadow: 0 20px 45px rgba(15, 23, 42, 0.45);
        width: min(980px, 100%);
      }
      h1 {
        margin: 0 0 0.25rem;
        font-size: 1.8rem;
        color: #f8fafc;
      }
      .subtitle {
        color: #94a3b8;
        margin-bottom: 1.5rem;
      }
      .buttons {
        margin-bottom: 1rem;
        display: flex;
        gap: 0.75rem;
        flex-wrap: wrap;
      }
      button {
        border: none;
        padding: 0.65rem 1.3rem;
        border-radius: 999px;
        font-size: 0.95rem;
        font-weight: 600;
        cursor: pointer;
        background: #4c1d95;
        color: #f8fafc;
      }
      button.active {
        background: #9d4edd;
      }
      .stream-container {
        background: #020617;
        border-radius: 12px;
        overflow: hidden;
        border: 1px solid #334155;
      }
      img#stream {
        width: 100%;
        min-height: 360px;
        max-height: 540px;
        object-fit: contain;
        display: block;
      }
      video {
        display: none;
      }
      .feedback {
        margin-top: 0.75rem;
        padding: 0.75rem 1rem;
        border-radius: 12px;
        background: #ff6b6b20;
        border: 1px solid #ff6b6b;
      }
      .feedback.correct {
        background: #4ade8020;
        border-color: #4ade80;
      }
      .tip {
        color: #94a3b8;
        font-size: 0.9rem;
      }
    </style>
  </head>
  <body>
    <div class="panel">
      <h1>Form Coach</h1>
      <p class="subtitle">Real-time form feedback from your camera.</p>
      <div class="buttons">
        <button class="active" data-exercise="squat">Squat</button>
        <button data-exercise="push-up">Push-up</button>
        <button data-exercise="plank">Plank</button>
        <button data-exercise="lunge">Lunge</button>
      </div>
      <div class="stream-container">
        <img id="stream" alt="Analyzed frame" />
      </div>
      <video id="camera" autoplay playsinline muted></video>
      <div id="feedback" class="feedback">
        <div id="message">Starting camera...</div>
        <div id="tip" class="tip"></div>
      </div>
    </div>
    <script>
      const video = document.getElementById('camera');
      const stream = document.getElementById('stream');
      const feedbackBox = document.getElementById('feedback');
      const message = document.getElementById('message');
      const tip = document.getElementById('tip');
      const canvas = document.createElement('canvas');
      let exercise = 'squat';
      let busy = false;

      document.querySelectorAll('button[data-exercise]').forEach((btn) => {
        btn.onclick = () => {
          document.querySelectorAll('button[data-exercise]').forEach((b) => b.classList.remove('active'));
          btn.classList.add('active');
          exercise = btn.dataset.exercise;
          fetch('/reset_analyzer', {
            method: 'POST',
            headers: {'Content-Type': 'application/json'},
            body: JSON.stringify({exercise})
          });
        };
      });

      async function sendFrame() {
        if (busy || !video.videoWidth) return;
        busy = true;
        canvas.width = video.videoWidth;
        canvas.height = video.videoHeight;
        canvas.getContext('2d').drawImage(video, 0, 0);
        const image = canvas.toDataURL('image/jpeg', 0.8).split(',')[1];
        try {
          const res = await fetch('/process_frame', {
            method: 'POST',
            headers: {'Content-Type': 'application/json'},
            body: JSON.stringify({image, exercise})
          });
          const data = await res.json();
          if (data.image) {
            stream.src = 'data:image/jpeg;base64,' + data.image;
            message.textContent = data.feedback.message;
            tip.textContent = data.feedback.tip;
            feedbackBox.className = data.feedback.isCorrect ? 'feedback correct' : 'feedback';
          } else {
            message.textContent = data.error || 'Processing failed';
          }
        } catch (err) {
          message.textContent = 'Server unavailable';
        } finally {
          busy = false;
        }
      }

      navigator.mediaDevices.getUserMedia({video: true})
        .then((media) => {
          video.srcObject = media;
          setInterval(sendFrame, 150);
        })
        .catch(() => {
          message.textContent = 'Camera unavailable - check browser permissions';
        });
    </script>
  </body>
</html>
"""
